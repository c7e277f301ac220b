"""StorageMeter: find where parallel sequential writes stop scaling on a volume."""

__version__ = "0.1.0"

from .dataframe import fields_from_frame, rows_from_frame

__all__ = ["fields_from_frame", "rows_from_frame"]

from dbfunc.utils import logging, text

__all__ = ("logging", "text")

from .formatting import format_address

__all__ = ['format_address']

"""
tokendao Package

Token-weighted DAO governance. Core imports are lazily loaded.
For direct module access, import from submodules:

    from tokendao.governance import DAO, ManualClock
    from tokendao.tokens import DaoToken
    from tokendao.config import load_config
"""

# Lazy imports to avoid loading everything at package import
def __getattr__(name):
    """Lazy module loading."""
    if name == 'DAO':
        from .governance.dao import DAO
        return DAO
    elif name == 'DaoToken':
        from .tokens.dao_token import DaoToken
        return DaoToken
    elif name == 'load_config':
        from .config.loader import load_config
        return load_config
    elif name == 'DAOException':
        from .exceptions import DAOException
        return DAOException
    raise AttributeError(f"module 'tokendao' has no attribute {name!r}")

__all__ = ['DAO', 'DaoToken', 'load_config', 'DAOException']

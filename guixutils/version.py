"""Version information of the ``guixutils`` package."""
__version__ = '0.3.0'
__app_name__ = 'guixutils'

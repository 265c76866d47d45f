from .main import cli, main

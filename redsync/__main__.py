"""
CLI entry point, when used as a module: `python -m redsync`.

Useful for debugging in the IDEs (use the start-mode "Module", module "redsync").
"""
from redsync import cli

if __name__ == '__main__':
    cli.main()

"""
CLI entry point, when used as a module: `python -m kubetype`.

Useful for debugging in the IDEs (use the start-mode "Module", module "kubetype").
"""
from kubetype import cli

if __name__ == '__main__':
    cli.main()

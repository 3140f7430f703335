"""Allow running rbit as `python -m rbit`"""

from rbit.cli import main

if __name__ == '__main__':
    main()

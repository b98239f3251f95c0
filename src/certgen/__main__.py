# certgen/__main__.py

from certgen.cli import main

if __name__ == "__main__":
    raise SystemExit(main())

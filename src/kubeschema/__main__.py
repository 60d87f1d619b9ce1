"""Allow ``python -m kubeschema``."""

from kubeschema.main import main

if __name__ == "__main__":
    main()

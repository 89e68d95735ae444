"""Module entrypoint to run `python -m wakeup_db`."""

from wakeup_db.cli import main

if __name__ == "__main__":
    main()

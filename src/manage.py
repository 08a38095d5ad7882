#!/usr/bin/env python
"""Django's command-line utility for administrative tasks."""

import os
import sys


def main() -> None:
    os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings")

    from django.conf import settings
    from django.core.management import execute_from_command_line
    from django.core.management.commands.runserver import Command as RunServer

    # ``runserver`` without an explicit address listens on settings.PORT.
    RunServer.default_port = str(settings.PORT)
    execute_from_command_line(sys.argv)


if __name__ == "__main__":
    main()

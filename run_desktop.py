#!/usr/bin/env python
"""Desktop app entrypoint for BillStack."""

import flet as ft

from billstack.desktop.app import main

if __name__ == "__main__":
    ft.app(target=main)

"""Textual screens and dialogs."""

import pathlib


CSS_FOLDER = pathlib.Path(__file__).parent.parent / "styles"

# Copyright 2026 Perspectives Contributors
# SPDX-License-Identifier: Apache-2.0

"""Sphinx configuration for the Perspectives documentation."""

project = "Perspectives"
author = "Perspectives Contributors"
release = "0.1.0"

extensions: list[str] = ["sphinx.ext.autodoc"]

html_theme = "alabaster"

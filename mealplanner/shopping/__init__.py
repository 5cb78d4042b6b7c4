# -*- coding: utf-8 -*-
"""Shared shopping list."""

# -*- coding: utf-8 -*-
"""Pantry and fridge inventory."""

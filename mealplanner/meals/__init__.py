# -*- coding: utf-8 -*-
"""Meal log and compliance history."""

# -*- coding: utf-8 -*-
"""Household member profiles and household settings."""

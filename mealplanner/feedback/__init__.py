# -*- coding: utf-8 -*-
"""User feedback."""

# -*- coding: utf-8 -*-
"""Recipe suggestions."""

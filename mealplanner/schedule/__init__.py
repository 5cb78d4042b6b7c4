# -*- coding: utf-8 -*-
"""Weekly meal schedule."""

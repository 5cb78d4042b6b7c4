# -*- coding: utf-8 -*-
"""Diet protocol guides extracted from book text."""

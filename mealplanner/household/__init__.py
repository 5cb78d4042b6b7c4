# -*- coding: utf-8 -*-
"""Households: identity to partition mapping and invitations."""

# -*- coding: utf-8 -*-
"""Nutrition backend — model-response normalization for meal, ingredient and recipe analysis."""

"""
Infrastructure layer package for GardenView.
Provides cloud storage, local settings storage, external API clients and image processing.
"""

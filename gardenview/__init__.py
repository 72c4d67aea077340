# 📄 File: gardenview/__init__.py
#
# 🧭 Purpose (Layman Explanation):
# Tells Python this folder holds the GardenView plant journal code
# and records the basic version and package information.
#
# 🧪 Purpose (Technical Summary):
# Package initialization with version metadata for the client-side
# garden state controller (store, sync controller, navigation, media pipeline).
#
# 🔗 Dependencies:
# - Python packaging system
#
# 🔄 Connected Modules / Calls From:
# - View layers embedding the controller
# - Test suite

"""
GardenView - Plant Journal Controller

Owns the signed-in user's garden data in memory, keeps it in sync with the
hosted Supabase backend, and brokers image, weather and AI side effects for
the view layer.
"""

__version__ = "1.0.0"
__title__ = "GardenView"
__description__ = "Plant journal state and synchronization controller"
__author__ = "GardenView Team"

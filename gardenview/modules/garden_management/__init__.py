# 📄 File: gardenview/modules/garden_management/__init__.py
# 🧭 Purpose (Layman Explanation):
# Organizes everything about your garden: plants, diary logs, garden areas, the notebook,
# the social feed, and the screens you move between.
# 🧪 Purpose (Technical Summary):
# Garden management module laid out in domain / application / infrastructure layers:
# domain models and gateway contracts, the state store, view-state machine and
# synchronization controller, and the Supabase gateway implementation.
# 🔗 Dependencies:
# pydantic, supabase, gardenview.shared
# 🔄 Connected Modules / Calls From:
# View layers embedding the controller, tests

"""
Garden Management Module

- Plant collection with logs, pins and archive state
- Garden logs and garden areas
- Notebook notes and recurring tasks
- Social feed with likes and comments
- Settings sync, navigation and AI/weather side effects
"""

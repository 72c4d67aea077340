# 📄 File: gardenview/modules/garden_management/domain/__init__.py
# 🧭 Purpose (Layman Explanation):
# The heart of the garden module: what plants, logs and areas are, and the rules they follow.
# 🧪 Purpose (Technical Summary):
# Domain layer package (models, repository interfaces, domain services).
# 🔗 Dependencies:
# pydantic
# 🔄 Connected Modules / Calls From:
# Application and infrastructure layers

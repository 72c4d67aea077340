# 📄 File: gardenview/modules/__init__.py
# 🧭 Purpose (Layman Explanation):
# Holds the feature modules of the app.
# 🧪 Purpose (Technical Summary):
# Feature module namespace package.
# 🔗 Dependencies:
# None
# 🔄 Connected Modules / Calls From:
# gardenview.modules.garden_management

# 📄 File: adoptd/modules/notifications/__init__.py
# 🧭 Purpose (Layman Explanation):
# Decides whether the app may show pop-up notifications and keeps the ones waiting to be shown.
# 🧪 Purpose (Technical Summary):
# Notifications module: permission state, tag de-duplication and the outbound notification queue.
# 🔗 Dependencies:
# adoptd.shared, pydantic
# 🔄 Connected Modules / Calls From:
# adoptd.container, reminders module

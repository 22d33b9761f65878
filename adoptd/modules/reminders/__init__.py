# 📄 File: adoptd/modules/reminders/__init__.py
# 🧭 Purpose (Layman Explanation):
# Remembers care tasks like 'spray again in 7 days' and reminds the user when the day comes.
# 🧪 Purpose (Technical Summary):
# Reminders module: reminder persistence, due-window evaluation and the polling loop that feeds the notification bridge.
# 🔗 Dependencies:
# adoptd.shared, pydantic
# 🔄 Connected Modules / Calls From:
# adoptd.container, reminder endpoints

# 📄 File: adoptd/modules/achievements/__init__.py
# 🧭 Purpose (Layman Explanation):
# Rewards users with achievements and titles for using the app and lets them show one title off.
# 🧪 Purpose (Technical Summary):
# Achievements module: action recording, server-side grant reconciliation, title equip/unequip and the requirement catalog.
# 🔗 Dependencies:
# adoptd.shared, pydantic
# 🔄 Connected Modules / Calls From:
# adoptd.container, forum, plant scanner, chat consultant

# 📄 File: adoptd/modules/session/__init__.py
# 🧭 Purpose (Layman Explanation):
# Handles signing in and out and the user's own profile: name, avatar and what they do for a living.
# 🧪 Purpose (Technical Summary):
# Session module: SessionState (auth lifecycle, role checks) and ProfileState over Supabase auth and the users table.
# 🔗 Dependencies:
# adoptd.shared, pydantic
# 🔄 Connected Modules / Calls From:
# adoptd.container, every module that needs the signed-in user

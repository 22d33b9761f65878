# 📄 File: adoptd/modules/forum/__init__.py
# 🧭 Purpose (Layman Explanation):
# The community board where users share posts and photos, reply and like each other's posts.
# 🧪 Purpose (Technical Summary):
# Forum module: optimistic post likes with reconciliation, posts, capped reply trees and comment likes.
# 🔗 Dependencies:
# adoptd.shared, pydantic
# 🔄 Connected Modules / Calls From:
# adoptd.container, forum endpoints

import logging

from firebase_admin import db
from database_interface import DatabaseInterface

logger = logging.getLogger(__name__)


def _with_id(docs, key):
    # Realtime Database returns {pushKey: doc}; keep the key on the document
    out = []
    for doc_id, doc in (docs or {}).items():
        if doc is None:
            continue
        doc.setdefault(key, doc_id)
        out.append(doc)
    return out


class FirebaseRepository(DatabaseInterface):
    # --- USER LOGIC ---
    def get_user(self, uid):
        if not uid:
            return None
        return db.reference(f"users/{uid}").get()

    def get_users(self, uids):
        users = {}
        for uid in dict.fromkeys(uids):
            users[uid] = self.get_user(uid)
        return users

    # --- GROUP LOGIC ---
    def get_group(self, group_id):
        group = db.reference(f"groups/{group_id}").get()
        if group is not None:
            group.setdefault("groupId", group_id)
            group.setdefault("members", [])
        return group

    def get_all_groups(self):
        groups = _with_id(db.reference("groups").get(), "groupId")
        for g in groups:
            g.setdefault("members", [])
        return groups

    # --- EXPENSE LOGIC ---
    def get_expenses_by_group(self, group_id):
        # Needs ".indexOn": ["groupId", "date"] on /expenses in the database rules
        docs = db.reference("expenses").order_by_child("groupId").equal_to(group_id).get()
        return _with_id(docs, "expenseId")

    # by_date index
    def get_expenses_since(self, start_ms):
        docs = db.reference("expenses").order_by_child("date").start_at(start_ms).get()
        return _with_id(docs, "expenseId")

    def get_all_expenses(self):
        return _with_id(db.reference("expenses").get(), "expenseId")

    def delete_group_cascade(self, group_id, expense_ids):
        # One multi-location update so no expense outlives its group
        updates = {f"expenses/{eid}": None for eid in expense_ids}
        updates[f"groups/{group_id}"] = None
        db.reference().update(updates)
        logger.info("Deleted group %s with %d expenses", group_id, len(expense_ids))

import copy

import pytest

from database_interface import DatabaseInterface


class InMemoryRepository(DatabaseInterface):
    """Dict-backed stand-in for the Realtime Database, same document shapes."""

    def __init__(self, users=None, groups=None, expenses=None):
        self.users = {u["userId"]: u for u in users or []}
        self.groups = {g["groupId"]: g for g in groups or []}
        self.expenses = {e["expenseId"]: e for e in expenses or []}
        self.deleted = []

    def get_user(self, uid):
        return copy.deepcopy(self.users.get(uid))

    def get_users(self, uids):
        return {uid: self.get_user(uid) for uid in uids}

    def get_group(self, group_id):
        return copy.deepcopy(self.groups.get(group_id))

    def get_all_groups(self):
        return [copy.deepcopy(g) for g in self.groups.values()]

    def get_expenses_by_group(self, group_id):
        return [copy.deepcopy(e) for e in self.expenses.values() if e.get("groupId") == group_id]

    def get_expenses_since(self, start_ms):
        return [copy.deepcopy(e) for e in self.expenses.values() if e.get("date", 0) >= start_ms]

    def get_all_expenses(self):
        return [copy.deepcopy(e) for e in self.expenses.values()]

    def delete_group_cascade(self, group_id, expense_ids):
        for eid in expense_ids:
            self.expenses.pop(eid, None)
        self.groups.pop(group_id, None)
        self.deleted.append(group_id)


def split(uid, amount, paid=False):
    return {"userId": uid, "amount": amount, "paid": paid}


def expense(eid, payer, splits, group_id=None, date=1_704_067_200_000, amount=None):
    return {
        "expenseId": eid,
        "description": eid,
        "amount": amount if amount is not None else sum(s["amount"] for s in splits),
        "date": date,
        "paidByUserId": payer,
        "groupId": group_id,
        "splits": splits,
    }


@pytest.fixture
def users():
    return [
        {"userId": "alice", "name": "Alice", "email": "alice@example.com", "imageUrl": "a.png"},
        {"userId": "bob", "name": "Bob", "email": "bob@example.com"},
        {"userId": "carol", "name": "Carol", "email": "carol@example.com"},
    ]


@pytest.fixture
def trip_group():
    return {
        "groupId": "trip",
        "name": "Trip",
        "description": "Weekend away",
        "createdBy": "alice",
        "members": [
            {"userId": "alice", "role": "admin"},
            {"userId": "bob", "role": "admin"},
            {"userId": "carol", "role": "member"},
        ],
    }


@pytest.fixture
def repo(users, trip_group):
    return InMemoryRepository(
        users=users,
        groups=[trip_group],
        expenses=[
            expense("dinner", "alice", [split("alice", 30), split("bob", 30), split("carol", 30)],
                    group_id="trip"),
            expense("coffee", "bob", [split("alice", 5), split("bob", 5)]),
        ],
    )

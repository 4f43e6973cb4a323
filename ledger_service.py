"""
Query layer between the HTTP routes and the ledger computations.

Every function takes the repository and the already-resolved current user
document, fetches a snapshot from storage, checks membership and hands the
snapshot to split_logic / spending. Errors from errors.py propagate as-is.
"""
import logging
from datetime import datetime, timezone

from errors import AuthenticationError, NotFoundError, UnauthorizedError
from split_logic import (
    UNKNOWN_NAME,
    compute_group_settlement,
    compute_user_balances,
    group_balance_for_user,
    involves,
)
from spending import monthly_spending, start_of_year_ms, total_spent

logger = logging.getLogger(__name__)


def _require_user(current_user):
    if not current_user or not current_user.get("userId"):
        raise AuthenticationError("Authentication required")
    return current_user["userId"]


def is_member(group, uid):
    return any(m.get("userId") == uid for m in group.get("members", []))


def _current_year(now):
    return (now or datetime.now(timezone.utc)).year


def _member_details(repo, group, drop_missing=False):
    member_ids = [m["userId"] for m in group.get("members", [])]
    users = repo.get_users(member_ids)

    details = []
    for m in group.get("members", []):
        user = users.get(m["userId"])
        if user is None:
            if drop_missing:
                continue
            logger.warning("Member %s of group %s not found", m["userId"], group.get("groupId"))
            user = {"name": UNKNOWN_NAME}
        details.append({
            "id": m["userId"],
            "name": user.get("name", UNKNOWN_NAME),
            "email": user.get("email"),
            "imageUrl": user.get("imageUrl"),
            "role": m.get("role", "member"),
        })
    return details


# --- DASHBOARD ---

def get_user_balances(repo, current_user):
    uid = _require_user(current_user)
    expenses = [e for e in repo.get_all_expenses()
                if not e.get("groupId") and involves(e, uid)]

    counterpart_ids = set()
    for e in expenses:
        counterpart_ids.add(e.get("paidByUserId"))
        counterpart_ids.update(s.get("userId") for s in e.get("splits", []))
    counterpart_ids.discard(uid)
    counterpart_ids.discard(None)

    users = repo.get_users(sorted(counterpart_ids))
    return compute_user_balances(uid, expenses, users)


def get_total_spent(repo, current_user, now=None):
    uid = _require_user(current_user)
    expenses = repo.get_expenses_since(start_of_year_ms(_current_year(now)))
    return total_spent(uid, expenses)


def get_monthly_spending(repo, current_user, now=None):
    uid = _require_user(current_user)
    year = _current_year(now)
    expenses = repo.get_expenses_since(start_of_year_ms(year))
    return monthly_spending(uid, expenses, year)


def get_user_groups(repo, current_user):
    uid = _require_user(current_user)
    groups = [g for g in repo.get_all_groups() if is_member(g, uid)]

    enhanced = []
    for group in groups:
        expenses = repo.get_expenses_by_group(group["groupId"])
        enhanced.append({
            **group,
            "id": group["groupId"],
            "balance": group_balance_for_user(uid, expenses),
        })
    return enhanced


# --- GROUPS ---

def get_group_expenses(repo, current_user, group_id):
    uid = _require_user(current_user)

    group = repo.get_group(group_id)
    if not group:
        raise NotFoundError("Group not found")
    if not is_member(group, uid) and group.get("createdBy") != uid:
        raise UnauthorizedError("You are not a member of this group")

    expenses = repo.get_expenses_by_group(group_id)
    members = _member_details(repo, group)
    settlement = compute_group_settlement(members, expenses)

    return {
        "group": {
            "id": group_id,
            "name": group.get("name"),
            "description": group.get("description"),
        },
        "members": members,
        "expenses": expenses,
        "balances": settlement["perMember"],
        "userLookupMap": {m["id"]: m for m in members},
    }


def delete_group(repo, current_user, group_id):
    uid = _require_user(current_user)

    group = repo.get_group(group_id)
    if not group:
        raise NotFoundError("Group not found")
    if not is_member(group, uid):
        raise UnauthorizedError("You are not a member of this group")
    if group.get("createdBy") != uid:
        raise UnauthorizedError("You are not authorized to delete this group")

    expense_ids = [e["expenseId"] for e in repo.get_expenses_by_group(group_id)]
    repo.delete_group_cascade(group_id, expense_ids)
    logger.info("User %s deleted group %s", uid, group_id)
    return {"success": True}


def get_groups_or_members(repo, current_user, group_id=None):
    uid = _require_user(current_user)
    user_groups = [g for g in repo.get_all_groups() if is_member(g, uid)]
    summaries = [{
        "id": g["groupId"],
        "name": g.get("name"),
        "description": g.get("description"),
        "memberCount": len(g.get("members", [])),
    } for g in user_groups]

    if not group_id:
        return {"selectedGroup": None, "groups": summaries}

    selected = next((g for g in user_groups if g["groupId"] == group_id), None)
    if not selected:
        raise NotFoundError("Group not found or you're not a member")

    return {
        "selectedGroup": {
            "id": selected["groupId"],
            "name": selected.get("name"),
            "description": selected.get("description"),
            "createdBy": selected.get("createdBy"),
            "members": _member_details(repo, selected, drop_missing=True),
        },
        "groups": summaries,
    }

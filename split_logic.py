from dataclasses import dataclass
from decimal import Decimal

UNKNOWN_NAME = "Unknown"


def _dec(value):
    return Decimal(str(value or 0))


@dataclass
class BalanceAccumulator:
    owed: Decimal = Decimal(0)   # counterparty owes the subject
    owing: Decimal = Decimal(0)  # subject owes the counterparty

    @property
    def net(self):
        return self.owed - self.owing


def involves(expense, user_id):
    if expense.get("paidByUserId") == user_id:
        return True
    return any(s.get("userId") == user_id for s in expense.get("splits", []))


def find_split(expense, user_id):
    for split in expense.get("splits", []):
        if split.get("userId") == user_id:
            return split
    return None


def accumulate_balances(subject_id, expenses):
    """Single pass over expenses, returns (owed_to_me, i_owe, {counterparty: BalanceAccumulator})."""
    owed_to_me = Decimal(0)
    i_owe = Decimal(0)
    by_user = {}

    for e in expenses:
        if not involves(e, subject_id):
            continue
        payer_id = e.get("paidByUserId")

        if payer_id == subject_id:
            for s in e.get("splits", []):
                if s.get("userId") == subject_id or s.get("paid"):
                    continue
                amt = _dec(s.get("amount"))
                owed_to_me += amt
                by_user.setdefault(s["userId"], BalanceAccumulator()).owed += amt
        else:
            my_split = find_split(e, subject_id)
            if my_split and not my_split.get("paid"):
                amt = _dec(my_split.get("amount"))
                i_owe += amt
                by_user.setdefault(payer_id, BalanceAccumulator()).owing += amt

    return owed_to_me, i_owe, by_user


def compute_user_balances(subject_id, expenses, users=None):
    """
    Net position of one user against every counterparty.

    `users` maps user id -> user document and is only used for display
    fields; a counterparty missing from it keeps its balance under the
    "Unknown" name.
    """
    users = users or {}
    owed_to_me, i_owe, by_user = accumulate_balances(subject_id, expenses)

    owes_list = []
    owed_by_list = []
    for uid, acc in by_user.items():
        net = acc.net
        if net == 0:
            continue
        counterpart = users.get(uid) or {}
        entry = {
            "userId": uid,
            "name": counterpart.get("name", UNKNOWN_NAME),
            "imageUrl": counterpart.get("imageUrl"),
            "amount": float(abs(net)),
        }
        if net > 0:
            owed_by_list.append(entry)
        else:
            owes_list.append(entry)

    # Largest obligations first
    owes_list.sort(key=lambda x: x["amount"], reverse=True)
    owed_by_list.sort(key=lambda x: x["amount"], reverse=True)

    return {
        "owedToMe": float(owed_to_me),
        "iOwe": float(i_owe),
        "netTotal": float(owed_to_me - i_owe),
        "breakdown": {"owesList": owes_list, "owedByList": owed_by_list},
    }


def group_balance_for_user(subject_id, expenses):
    """Rolled-up balance of a user within one group; positive means the group owes them."""
    owed_to_me, i_owe, _ = accumulate_balances(subject_id, expenses)
    return float(owed_to_me - i_owe)


def build_debt_matrix(member_ids, expenses, index_map=None):
    if index_map is None:
        index_map = {uid: i for i, uid in enumerate(member_ids)}
    n = len(member_ids)
    txn = [[Decimal(0)] * n for _ in range(n)]

    for e in expenses:
        payer_idx = index_map.get(e.get("paidByUserId"))
        for s in e.get("splits", []):
            if s.get("userId") == e.get("paidByUserId") or s.get("paid"):
                continue
            debtor_idx = index_map.get(s.get("userId"))
            # Splits for users outside the member list cannot be placed in the grid
            if payer_idx is None or debtor_idx is None:
                continue
            txn[debtor_idx][payer_idx] += _dec(s.get("amount"))

    return txn


def net_balances(txn):
    n = len(txn)
    net = []
    for i in range(n):
        outgoing = sum(txn[i], Decimal(0))
        incoming = sum((txn[r][i] for r in range(n)), Decimal(0))
        net.append(incoming - outgoing)
    return net


def simplify_debts(net):
    """
    Greedy two-pointer settlement over a net balance vector.

    Returns an n x n grid where grid[debtor][creditor] is the amount the
    debtor pays. Parties are sorted ascending by amount with a stable sort,
    so equal balances keep their original member order.
    """
    n = len(net)
    optimized = [[Decimal(0)] * n for _ in range(n)]

    parties = [[amt, idx] for idx, amt in enumerate(net) if amt != 0]
    parties.sort(key=lambda p: p[0])

    i = 0
    j = len(parties) - 1
    while i < j:
        debtor = parties[i]
        creditor = parties[j]
        transfer = min(-debtor[0], creditor[0])

        optimized[debtor[1]][creditor[1]] += transfer
        debtor[0] += transfer
        creditor[0] -= transfer

        if debtor[0] == 0: i += 1
        if creditor[0] == 0: j -= 1

    return optimized


def compute_group_settlement(members, expenses):
    """
    Net balance and simplified transfers for every member of a group.

    `members` is an ordered list of dicts carrying at least "id"; the order
    fixes the matrix indices and therefore the tie-break between members
    with equal balances.
    """
    ids = [m["id"] for m in members]
    index_map = {uid: i for i, uid in enumerate(ids)}

    txn = build_debt_matrix(ids, expenses, index_map)
    net = net_balances(txn)
    optimized = simplify_debts(net)

    per_member = []
    for idx, m in enumerate(members):
        owes = [{"to": ids[jdx], "amount": float(amt)}
                for jdx, amt in enumerate(optimized[idx]) if amt > 0]
        owed_by = [{"from": ids[jdx], "amount": float(row[idx])}
                   for jdx, row in enumerate(optimized) if row[idx] > 0]
        per_member.append({
            "memberId": m["id"],
            "name": m.get("name", UNKNOWN_NAME),
            "imageUrl": m.get("imageUrl"),
            "role": m.get("role"),
            "netBalance": float(net[idx]),
            "owes": owes,
            "owedBy": owed_by,
        })

    return {"perMember": per_member}

"""
Blood type compatibility helper.
Determines which donor blood groups may give to which recipient groups.
"""
from typing import Dict, FrozenSet, Set

# Recipient group -> donor groups allowed to give to it
RECEIVE_FROM: Dict[str, FrozenSet[str]] = {
    "O-": frozenset({"O-"}),
    "O+": frozenset({"O-", "O+"}),
    "A-": frozenset({"O-", "A-"}),
    "A+": frozenset({"O-", "O+", "A-", "A+"}),
    "B-": frozenset({"O-", "B-"}),
    "B+": frozenset({"O-", "O+", "B-", "B+"}),
    "AB-": frozenset({"O-", "A-", "B-", "AB-"}),
    "AB+": frozenset({"O-", "O+", "A-", "A+", "B-", "B+", "AB-", "AB+"}),  # Universal recipient
}


def compatible_donor_types(recipient_group: str) -> Set[str]:
    """
    Blood groups that can donate to `recipient_group`.

    Unknown groups only match themselves.
    """
    if recipient_group in RECEIVE_FROM:
        return set(RECEIVE_FROM[recipient_group])
    return {recipient_group}


def compatible_recipient_types(donor_group: str) -> Set[str]:
    """Blood groups that can receive from `donor_group`."""
    return {recipient for recipient, donors in RECEIVE_FROM.items() if donor_group in donors}


def is_compatible(donor_group: str, recipient_group: str) -> bool:
    return donor_group in compatible_donor_types(recipient_group)

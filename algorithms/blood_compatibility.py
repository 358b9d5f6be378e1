"""
Blood Type Compatibility Helper
Determines which donor blood types can donate to which recipient blood types
"""
from types import MappingProxyType

BLOOD_TYPES = ('O+', 'O-', 'A+', 'A-', 'B+', 'B-', 'AB+', 'AB-')

UNIVERSAL_DONOR = 'O-'

# Blood type compatibility matrix
# Key: donor blood type, value: recipient blood types that donor can supply
COMPATIBILITY = MappingProxyType({
    'O+': frozenset({'O+', 'A+', 'B+', 'AB+'}),
    'O-': frozenset(BLOOD_TYPES),  # Universal donor
    'A+': frozenset({'A+', 'AB+'}),
    'A-': frozenset({'A+', 'A-', 'AB+', 'AB-'}),
    'B+': frozenset({'B+', 'AB+'}),
    'B-': frozenset({'B+', 'B-', 'AB+', 'AB-'}),
    'AB+': frozenset({'AB+'}),  # Universal recipient
    'AB-': frozenset({'AB+', 'AB-'}),
})


def can_donate(donor_blood_type, recipient_blood_type):
    """
    Check if donor blood type is compatible with recipient

    Args:
        donor_blood_type: Donor's blood type (e.g., 'O+')
        recipient_blood_type: Recipient's blood type (e.g., 'A+')

    Returns:
        Boolean: True if compatible, False otherwise (including unknown types)
    """
    if not isinstance(donor_blood_type, str) or not isinstance(recipient_blood_type, str):
        return False

    return recipient_blood_type in COMPATIBILITY.get(donor_blood_type, ())


def compatible_donor_groups(recipient_blood_type):
    """
    Get the blood types that can donate to recipient

    Args:
        recipient_blood_type: Recipient's blood type

    Returns:
        frozenset of compatible donor blood types
    """
    if not isinstance(recipient_blood_type, str):
        return frozenset()

    return frozenset(
        donor_type
        for donor_type, recipients in COMPATIBILITY.items()
        if recipient_blood_type in recipients
    )


def compatible_recipient_groups(donor_blood_type):
    """Get the blood types that can receive from donor"""
    if not isinstance(donor_blood_type, str):
        return frozenset()
    return COMPATIBILITY.get(donor_blood_type, frozenset())

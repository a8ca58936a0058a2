"""
Contract registry for centralized contract management
"""

from typing import Dict
from sunday_school.contracts.base import ResourceContract
from sunday_school.contracts.children import get_children_contract
from sunday_school.contracts.teachers import get_teachers_contract
from sunday_school.contracts.sunday_records import get_sunday_records_contract
from sunday_school.contracts.events import get_events_contract

def get_all_contracts() -> Dict[str, ResourceContract]:
    """Get all resource contracts keyed by resource name"""
    return {
        "children": get_children_contract(),
        "teachers": get_teachers_contract(),
        "sunday_records": get_sunday_records_contract(),
        "events": get_events_contract(),
    }

def get_available_resources() -> list[str]:
    """Get list of all available resource names"""
    return list(get_all_contracts().keys())

from cubecraft.db.database import get_session, init_db
from cubecraft.db.operations import (
    card_data_to_entries,
    create_cube,
    cube_to_record,
    cube_to_summary,
    delete_cube,
    get_cube,
    list_cubes,
    record_to_card_data,
    update_cube,
)

__all__ = [
    "card_data_to_entries",
    "create_cube",
    "cube_to_record",
    "cube_to_summary",
    "delete_cube",
    "get_cube",
    "get_session",
    "init_db",
    "list_cubes",
    "record_to_card_data",
    "update_cube",
]

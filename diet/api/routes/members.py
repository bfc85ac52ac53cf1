from fastapi import APIRouter, HTTPException

from diet.infra.Member_Repository import reading_from_members, deactivate_member

router = APIRouter(prefix="/api/members", tags=["members"])


@router.get("")
def list_members():
    return [m.to_dict() for m in reading_from_members()]


@router.post("/{member_id}/deactivate")
def deactivate(member_id: str):
    """Members are never deleted: past plans still reference them."""
    if not deactivate_member(member_id):
        raise HTTPException(status_code=404, detail='Member not found')
    return {"id": member_id, "active": False}

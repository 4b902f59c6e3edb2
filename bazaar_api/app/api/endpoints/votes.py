"""
API endpoints for anonymous votes.

Votes need no account: the client sends a fingerprint that identifies
the voter for deduplication.
"""

from fastapi import APIRouter, HTTPException, status

from bazaar_api.app.schemas.notification import SuccessResponse
from bazaar_api.app.schemas.vote import VoteCreate, VoteTally
from bazaar_api.app.services.vote_service import VoteService


router = APIRouter()


@router.get("/votes/{place_id:path}", response_model=VoteTally, summary="Vote tally for a place")
async def get_votes(place_id: str) -> VoteTally:
    return await VoteService.get_votes(place_id)


@router.post("/votes", response_model=SuccessResponse, summary="Vote on a place")
async def submit_vote(data: VoteCreate) -> SuccessResponse:
    try:
        await VoteService.submit_vote(data.place_id, data.vote_type, data.user_fingerprint)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return SuccessResponse()

from pymongo import MongoClient
from bson import ObjectId
from video_api.core.config import settings


def count_members(db, field: str) -> dict:
    """video_id -> number of users holding it in `field`."""
    pipeline = [
        {"$unwind": f"${field}"},
        {"$group": {"_id": f"${field}", "count": {"$sum": 1}}},
    ]
    return {d["_id"]: d["count"] for d in db["users"].aggregate(pipeline)}


def main():
    db = MongoClient(settings.mongo_dsn)[settings.mongo_db]
    likes = count_members(db, "liked_videos")
    dislikes = count_members(db, "disliked_videos")

    fixed = 0
    for video in db["videos"].find({}, {"likes": 1, "dislikes": 1}):
        vid = str(video["_id"])
        expected = {"likes": likes.get(vid, 0),
                    "dislikes": dislikes.get(vid, 0)}
        if (video.get("likes"), video.get("dislikes")) != \
                (expected["likes"], expected["dislikes"]):
            db["videos"].update_one({"_id": ObjectId(vid)},
                                    {"$set": expected})
            fixed += 1
            print(f"  {vid}: {video.get('likes')}/{video.get('dislikes')}"
                  f" -> {expected['likes']}/{expected['dislikes']}")

    print(f"Recount done, fixed={fixed}.")


if __name__ == "__main__":
    main()

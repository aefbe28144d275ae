from pymongo import MongoClient, ASCENDING
from video_api.core.config import settings


def main():
    db = MongoClient(settings.mongo_dsn)[settings.mongo_db]
    col = db["users"]

    # subjects registered more than once (before users_sub existed)
    pipeline = [
        {"$group": {"_id": "$sub", "count": {"$sum": 1}}},
        {"$match": {"count": {"$gt": 1}}}
    ]
    dups = list(col.aggregate(pipeline))
    print(f"Duplicate subjects: {len(dups)}")

    # keep the earliest registration, fold the others' sets into it
    for d in dups:
        docs = list(col.find({"sub": d["_id"]}).sort("_id", ASCENDING))
        keep, rest = docs[0], docs[1:]
        merged = {}
        for field in ("liked_videos", "disliked_videos", "video_history",
                      "subscribed_to_users", "subscribers"):
            values = set(keep.get(field, []))
            for doc in rest:
                values.update(doc.get(field, []))
            merged[field] = sorted(values)
        # a video liked in one copy and disliked in another stays liked
        merged["disliked_videos"] = sorted(
            set(merged["disliked_videos"]) - set(merged["liked_videos"]))
        col.update_one({"_id": keep["_id"]}, {"$set": merged})
        col.delete_many({"_id": {"$in": [x["_id"] for x in rest]}})
        print(f"  kept={keep['_id']}, deleted={len(rest)} for {d['_id']}")

    print("Dedup done. Run recount_reactions.py to fix video counters.")


if __name__ == "__main__":
    main()

from pymongo import MongoClient, ASCENDING, DESCENDING
from video_api.core.config import settings


def main():
    db = MongoClient(settings.mongo_dsn)[settings.mongo_db]

    print("Using DSN:", settings.mongo_dsn, "DB:", settings.mongo_db)

    # users: one local user per external subject
    db["users"].create_index(
        [("sub", ASCENDING)], unique=True, name="users_sub"
    )

    # videos: default listing order
    db["videos"].create_index(
        [("created_at", DESCENDING)], name="videos_created_desc"
    )
    db["videos"].create_index(
        [("user_id", ASCENDING), ("created_at", DESCENDING)],
        name="videos_user_created_desc"
    )

    print("Indexes ensured.")


if __name__ == "__main__":
    main()

import pytest

from videotube.models import Comment, Like, PlaylistVideo


def test_publish_video(client, seed, auth):
    owner = seed.user()

    response = client.post(
        "/api/videos",
        json={"title": "Intro", "videoFile": "https://cdn.example.com/intro.mp4", "duration": 12.5},
        headers=auth(owner),
    )

    assert response.status_code == 201
    data = response.json()["data"]
    assert data["ownerId"] == owner.id
    assert data["views"] == 0
    assert data["isPublished"] is True
    assert data["description"] == ""


def test_publish_video_validates_body(client, seed, auth):
    owner = seed.user()

    response = client.post("/api/videos", json={"title": ""}, headers=auth(owner))

    assert response.status_code == 400
    assert response.json()["success"] is False


def test_list_videos_only_published(client, seed):
    owner = seed.user()
    visible = seed.video(owner, "visible")
    seed.video(owner, "hidden", is_published=False)

    data = client.get("/api/videos").json()["data"]

    assert data["total"] == 1
    assert [video["id"] for video in data["videos"]] == [visible.id]


def test_get_video_counts_a_view(client, seed):
    owner = seed.user()
    video = seed.video(owner, views=2)

    client.get(f"/api/videos/{video.id}")
    response = client.get(f"/api/videos/{video.id}")

    assert response.json()["data"]["views"] == 4


def test_unpublished_video_visible_to_owner_only(client, seed, auth):
    owner = seed.user()
    stranger = seed.user()
    video = seed.video(owner, "draft", views=3, is_published=False)
    url = f"/api/videos/{video.id}"

    anonymous = client.get(url)
    other_user = client.get(url, headers=auth(stranger))
    own = client.get(url, headers=auth(owner))

    assert anonymous.status_code == 404
    assert anonymous.json()["message"] == "Video not found"
    assert other_user.status_code == 404
    assert own.status_code == 200
    assert own.json()["data"]["views"] == 3


def test_owner_reads_are_not_counted_as_views(client, seed, auth):
    owner = seed.user()
    viewer = seed.user()
    video = seed.video(owner, views=0)
    url = f"/api/videos/{video.id}"

    client.get(url, headers=auth(owner))
    client.get(url, headers=auth(viewer))
    response = client.get(url, headers=auth(owner))

    assert response.json()["data"]["views"] == 1


def test_get_video_with_malformed_identity(client, seed):
    owner = seed.user()
    video = seed.video(owner)

    response = client.get(f"/api/videos/{video.id}", headers={"X-User-Id": "abc"})

    assert response.status_code == 401


@pytest.mark.parametrize("query", ["skip=-1", "limit=0", "limit=-1", "limit=101", "skip=x"])
def test_list_paging_is_validated(client, seed, query):
    owner = seed.user()
    video = seed.video(owner)

    listed = client.get(f"/api/videos?{query}")
    comments = client.get(f"/api/videos/{video.id}/comments?{query}")

    for response in (listed, comments):
        assert response.status_code == 400
        assert response.json()["success"] is False


def test_list_paging_window(client, seed):
    owner = seed.user()
    oldest = seed.video(owner, "oldest")
    middle = seed.video(owner, "middle")
    seed.video(owner, "newest")

    data = client.get("/api/videos?skip=1&limit=2").json()["data"]

    assert data["total"] == 3
    assert [video["id"] for video in data["videos"]] == [middle.id, oldest.id]


def test_get_missing_video(client):
    response = client.get("/api/videos/77")

    assert response.status_code == 404
    assert response.json()["message"] == "Video not found"


def test_update_video_owner_only(client, seed, auth):
    owner = seed.user()
    intruder = seed.user()
    video = seed.video(owner, "before")

    denied = client.patch(f"/api/videos/{video.id}", json={"title": "hijack"}, headers=auth(intruder))
    empty = client.patch(f"/api/videos/{video.id}", json={}, headers=auth(owner))
    updated = client.patch(f"/api/videos/{video.id}", json={"title": "after"}, headers=auth(owner))

    assert denied.status_code == 401
    assert empty.status_code == 400
    assert updated.status_code == 200
    assert updated.json()["data"]["title"] == "after"
    assert updated.json()["data"]["description"] == "before description"


def test_toggle_publish_status(client, seed, auth):
    owner = seed.user()
    video = seed.video(owner)

    response = client.patch(f"/api/videos/{video.id}/publish", headers=auth(owner))

    assert response.json()["data"]["isPublished"] is False


def test_delete_video_removes_dependents(client, seed, auth, session_factory):
    owner = seed.user()
    fan = seed.user()
    video = seed.video(owner)
    kept = seed.video(owner, "kept")
    seed.like(video, fan)
    seed.comment(video, fan)
    playlist = seed.playlist(fan, videos=[video, kept])

    response = client.delete(f"/api/videos/{video.id}", headers=auth(owner))

    assert response.status_code == 200
    with session_factory() as db:
        assert db.query(Like).count() == 0
        assert db.query(Comment).count() == 0
        remaining = db.query(PlaylistVideo).filter(PlaylistVideo.playlist_id == playlist.id).all()
        assert [entry.video_id for entry in remaining] == [kept.id]


# ---------- 좋아요 ----------

def test_toggle_like(client, seed, auth):
    owner = seed.user()
    fan = seed.user()
    video = seed.video(owner)
    url = f"/api/videos/{video.id}/like"

    liked = client.post(url, headers=auth(fan)).json()["data"]
    status_after_like = client.get(url, headers=auth(fan)).json()["data"]
    unliked = client.post(url, headers=auth(fan)).json()["data"]

    assert liked == {"videoId": video.id, "likesCount": 1, "isLiked": True}
    assert status_after_like["isLiked"] is True
    assert unliked == {"videoId": video.id, "likesCount": 0, "isLiked": False}


def test_like_missing_video(client, seed, auth):
    fan = seed.user()

    assert client.post("/api/videos/404/like", headers=auth(fan)).status_code == 404


# ---------- 댓글 ----------

def test_comment_lifecycle(client, seed, auth):
    owner = seed.user()
    fan = seed.user()
    video = seed.video(owner)
    base = f"/api/videos/{video.id}/comments"

    created = client.post(base, json={"content": "first!"}, headers=auth(fan))
    assert created.status_code == 201
    comment_id = created.json()["data"]["id"]

    listed = client.get(base).json()["data"]
    assert listed["total"] == 1
    assert listed["comments"][0]["content"] == "first!"

    denied = client.patch(f"{base}/{comment_id}", json={"content": "edited"}, headers=auth(owner))
    assert denied.status_code == 401

    edited = client.patch(f"{base}/{comment_id}", json={"content": "edited"}, headers=auth(fan))
    assert edited.json()["data"]["content"] == "edited"

    assert client.delete(f"{base}/{comment_id}", headers=auth(owner)).status_code == 401
    assert client.delete(f"{base}/{comment_id}", headers=auth(fan)).status_code == 200
    assert client.get(base).json()["data"]["total"] == 0


def test_comment_on_missing_video(client, seed, auth):
    fan = seed.user()

    response = client.post("/api/videos/31/comments", json={"content": "hi"}, headers=auth(fan))

    assert response.status_code == 404


# ---------- 트윗 / 사용자 ----------

def test_tweets_feed_channel_stats(client, seed, auth):
    owner = seed.user()

    assert client.post("/api/tweets", json={"content": "one"}, headers=auth(owner)).status_code == 201
    assert client.post("/api/tweets", json={"content": "two"}, headers=auth(owner)).status_code == 201

    tweets = client.get(f"/api/tweets/user/{owner.id}").json()["data"]
    stats = client.get(f"/api/dashboard/stats/{owner.id}").json()["data"]

    assert [tweet["content"] for tweet in tweets] == ["two", "one"]
    assert stats["totalTweets"] == 2


def test_create_and_fetch_user(client):
    created = client.post(
        "/api/users",
        json={"username": "Creator", "email": "creator@example.com", "fullName": "The Creator"},
    )
    assert created.status_code == 201
    user = created.json()["data"]
    assert user["username"] == "creator"

    fetched = client.get(f"/api/users/{user['id']}")
    assert fetched.json()["data"]["fullName"] == "The Creator"

    duplicate = client.post(
        "/api/users",
        json={"username": "creator", "email": "other@example.com", "fullName": "Copy"},
    )
    assert duplicate.status_code == 400


def test_unknown_user_is_not_found(client):
    assert client.get("/api/users/5").status_code == 404

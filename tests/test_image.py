from copro.models.image import Image
from copro.models.member import Member


async def _image(image_id: int) -> Image | None:
    from copro.dependencies.mysql import _async_session

    async with _async_session() as session:
        return await session.get(Image, image_id)


class TestUploadImages:
    async def test_success(self, api_client, member, s3_client):
        response = await api_client.post(
            "/api/v1/images",
            files=[
                ("files", ("cat.PNG", b"png-bytes", "image/png")),
                ("files", ("dog.jpg", b"jpg-bytes", "image/jpeg")),
            ],
            headers=member["headers"],
        )

        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "업로드 완료"
        images = body["data"]
        assert len(images) == 2
        assert all(image["board_id"] is None for image in images)

        saved = await _image(images[0]["image_id"])
        assert saved.storage_key.startswith("images/")
        assert saved.storage_key.endswith(".png")
        assert saved.url.endswith(saved.storage_key)
        assert s3_client.objects[saved.storage_key] == b"png-bytes"

    async def test_rejects_non_image(self, api_client, member, s3_client):
        response = await api_client.post(
            "/api/v1/images",
            files=[
                ("files", ("ok.png", b"png-bytes", "image/png")),
                ("files", ("memo.txt", b"text", "text/plain")),
            ],
            headers=member["headers"],
        )

        assert response.status_code == 400
        assert response.json()["data"] is None
        assert s3_client.objects == {}

    async def test_unauthenticated(self, api_client):
        response = await api_client.post(
            "/api/v1/images",
            files=[("files", ("cat.png", b"png-bytes", "image/png"))],
        )
        assert response.status_code == 422


class TestGetImage:
    async def test_success(self, api_client, member, create_images):
        (image_id,) = await create_images(1)

        response = await api_client.get(
            f"/api/v1/images/{image_id}", headers=member["headers"]
        )

        assert response.status_code == 200
        assert response.json()["data"]["image_id"] == image_id

    async def test_not_found(self, api_client, member):
        response = await api_client.get(
            "/api/v1/images/9999", headers=member["headers"]
        )
        assert response.status_code == 404


class TestDeleteImage:
    async def _mapped_image(self, api_client, member, create_images) -> tuple[int, int]:
        (image_id,) = await create_images(1)
        response = await api_client.post(
            "/api/board",
            json={
                "title": "이미지 게시물",
                "category": "PROJECT",
                "contents": "내용",
                "image_ids": [image_id],
            },
            headers=member["headers"],
        )
        return response.json()["data"]["board_id"], image_id

    async def test_unmapped_image(self, api_client, member, create_images, s3_client):
        (image_id,) = await create_images(1)

        response = await api_client.delete(
            f"/api/v1/images/{image_id}", headers=member["headers"]
        )

        assert response.status_code == 200
        assert await _image(image_id) is None
        assert s3_client.deleted == ["images/0.png"]

    async def test_mapped_image_by_owner(self, api_client, member, create_images):
        board_id, image_id = await self._mapped_image(api_client, member, create_images)

        response = await api_client.delete(
            f"/api/v1/images/{image_id}",
            params={"boardId": board_id},
            headers=member["headers"],
        )

        assert response.status_code == 200
        assert await _image(image_id) is None

    async def test_mapped_image_by_other(
        self, api_client, member, other_member, create_images
    ):
        _, image_id = await self._mapped_image(api_client, member, create_images)

        response = await api_client.delete(
            f"/api/v1/images/{image_id}", headers=other_member["headers"]
        )

        assert response.status_code == 403
        assert await _image(image_id) is not None

    async def test_wrong_board(self, api_client, member, create_images):
        board_id, image_id = await self._mapped_image(api_client, member, create_images)

        response = await api_client.delete(
            f"/api/v1/images/{image_id}",
            params={"boardId": board_id + 1},
            headers=member["headers"],
        )

        assert response.status_code == 404
        assert await _image(image_id) is not None


class TestDeleteImageOrdering:
    async def test_row_is_deleted_before_object(self, db_session, member, create_images):
        from copro.services import image as image_service

        (image_id,) = await create_images(1)
        rows_at_object_delete = []

        class _CheckingS3:
            async def delete_object(self, Bucket, Key, **kwargs):
                rows_at_object_delete.append(await _image(image_id))

        owner = await db_session.get(Member, member["id"])
        await image_service.delete_image(db_session, _CheckingS3(), image_id, None, owner)

        assert rows_at_object_delete == [None]


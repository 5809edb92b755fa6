"""
End-to-end API tests through the FastAPI app.
"""

import pytest


async def create_project(client, project_no="JOB-1", **extra):
    body = {"project_no": project_no, "customer": "Metro Dairy", **extra}
    response = await client.post("/api/projects/", json=body)
    assert response.status_code == 201, response.text
    return response.json()


async def get_project(client, project_id):
    response = await client.get(f"/api/projects/{project_id}")
    assert response.status_code == 200, response.text
    return response.json()


class TestProjects:
    async def test_create_sanitizes_project_no(self, client):
        project = await create_project(client, "JOB/2026/7")

        assert project["project_no"] == "JOB_2026_7"
        assert project["status"] == "active"
        assert project["total_panel"] == 0
        assert project["created_at"] is not None

    async def test_duplicate_project_no_conflicts(self, client):
        await create_project(client, "JOB-9")

        response = await client.post("/api/projects/", json={"project_no": "JOB-9", "customer": "X"})

        assert response.status_code == 409
        assert response.json()["error"] == "conflict"

    async def test_customer_required(self, client):
        response = await client.post("/api/projects/", json={"project_no": "JOB-8", "customer": " "})
        assert response.status_code == 400

    async def test_list_includes_completion(self, client):
        await create_project(client, "JOB-1")
        await client.post("/api/panel-tasks/", json={
            "title": "Panel", "project_no": "JOB-1", "status": "Completed",
        })

        response = await client.get("/api/projects/")

        assert response.status_code == 200
        [project] = response.json()
        assert project["completion"]["panel"] == {"completed": 1, "total": 1, "percentage": 100}
        assert project["completion"]["door"] == {"completed": 0, "total": 0, "percentage": 0}

    async def test_list_by_status(self, client):
        created = await create_project(client, "JOB-A")
        await create_project(client, "JOB-B")
        response = await client.patch(
            f"/api/projects/{created['id']}/status", json={"status": "Approved"}
        )
        assert response.status_code == 200

        approved = await client.get("/api/projects/status/approved")
        unknown = await client.get("/api/projects/status/archived")

        assert [p["project_no"] for p in approved.json()] == ["JOB-A"]
        assert unknown.json() == []

    async def test_renumber_carries_tasks_along(self, client):
        project = await create_project(client, "OLD-1")
        await client.post("/api/door-tasks/", json={"title": "Door", "project_no": "OLD-1"})

        response = await client.patch(f"/api/projects/{project['id']}", json={"project_no": "NEW-1"})
        assert response.status_code == 200

        tasks = (await client.get("/api/door-tasks/", params={"project_no": "NEW-1"})).json()
        assert len(tasks) == 1
        completion = (await client.get("/api/projects/completion/NEW-1")).json()
        assert completion["door"]["total"] == 1

    async def test_delete_cascades_to_tasks_and_files(self, client):
        project = await create_project(client, "JOB-X")
        await client.post("/api/cutting-tasks/", json={"title": "Cut", "project_no": "JOB-X"})
        await client.post(
            "/api/projects/upload",
            data={"project_no": "JOB-X"},
            files=[("files", ("plan.pdf", b"%PDF-1.4", "application/pdf"))],
        )

        response = await client.delete(f"/api/projects/{project['id']}")

        assert response.status_code == 204
        assert (await client.get(f"/api/projects/{project['id']}")).status_code == 404
        assert (await client.get("/api/cutting-tasks/", params={"project_no": "JOB-X"})).json() == []
        assert (await client.get("/api/projects/JOB-X/files")).json() == []

    async def test_completion_for_unknown_project(self, client):
        response = await client.get("/api/projects/completion/NOPE")
        assert response.status_code == 404
        assert response.json()["error"] == "not_found"

    async def test_broken_category_table(self, client, test_engine):
        project = await create_project(client, "JOB-B")
        await client.post("/api/door-tasks/", json={
            "title": "Door", "project_no": "JOB-B", "status": "completed",
        })
        async with test_engine.begin() as conn:
            await conn.exec_driver_sql("DROP TABLE cutting_tasks")

        completion = await client.get("/api/projects/completion/JOB-B")
        listed = await client.get("/api/projects/")
        by_status = await client.get("/api/projects/status/active")

        assert completion.status_code == 500
        assert completion.json()["error"] == "completion_error"
        assert listed.status_code == 200
        assert listed.json()[0]["completion"]["door"] == {"completed": 0, "total": 0, "percentage": 0}
        assert by_status.status_code == 200
        assert by_status.json()[0]["id"] == project["id"]
        assert by_status.json()[0]["completion"]["door"]["total"] == 0


class TestTaskRoutes:
    @pytest.mark.parametrize("slug,column", [
        ("panel", "panel"),
        ("door", "door"),
        ("cutting", "cutting"),
        ("accessories", "accessories"),
        ("strip-curtain", "strip_curtain"),
        ("system", "system"),
    ])
    async def test_lifecycle_updates_counters(self, client, slug, column):
        project = await create_project(client, "JOB-1")
        base = f"/api/{slug}-tasks"

        created = await client.post(f"{base}/", json={"title": "Item", "project_no": "JOB-1"})
        assert created.status_code == 201
        task = created.json()
        assert task["status"] == "pending"
        p = await get_project(client, project["id"])
        assert (p[f"total_{column}"], p[f"completed_{column}"]) == (1, 0)

        updated = await client.patch(f"{base}/{task['id']}", json={"status": "Completed"})
        assert updated.status_code == 200
        p = await get_project(client, project["id"])
        assert (p[f"total_{column}"], p[f"completed_{column}"]) == (1, 1)

        deleted = await client.delete(f"{base}/{task['id']}")
        assert deleted.status_code == 200
        assert deleted.json() == {"message": "Task deleted successfully"}
        p = await get_project(client, project["id"])
        assert (p[f"total_{column}"], p[f"completed_{column}"]) == (0, 0)

    async def test_move_task_between_projects(self, client):
        a = await create_project(client, "A-1")
        b = await create_project(client, "B-1")
        task = (await client.post("/api/panel-tasks/", json={
            "title": "Panel", "project_no": "A-1", "status": "completed",
        })).json()

        response = await client.patch(f"/api/panel-tasks/{task['id']}", json={"project_no": "B-1"})

        assert response.status_code == 200
        assert response.json()["project_no"] == "B-1"
        pa, pb = await get_project(client, a["id"]), await get_project(client, b["id"])
        assert (pa["total_panel"], pa["completed_panel"]) == (0, 0)
        assert (pb["total_panel"], pb["completed_panel"]) == (1, 1)

    async def test_validation(self, client):
        missing_title = await client.post("/api/door-tasks/", json={"title": " ", "project_no": "J"})
        missing_project = await client.post("/api/door-tasks/", json={"title": "T", "project_no": ""})
        empty_patch = await client.patch("/api/door-tasks/1", json={})

        assert missing_title.status_code == 400
        assert missing_project.status_code == 400
        assert empty_patch.status_code == 400

    async def test_unknown_task(self, client):
        assert (await client.get("/api/system-tasks/99")).status_code == 404
        assert (await client.patch("/api/system-tasks/99", json={"title": "x"})).status_code == 404
        assert (await client.delete("/api/system-tasks/99")).status_code == 404

    async def test_status_keeps_client_casing(self, client):
        project = await create_project(client, "JOB-1")

        task = (await client.post("/api/panel-tasks/", json={
            "title": "Panel", "project_no": "JOB-1", "status": "Completed",
        })).json()
        fetched = (await client.get(f"/api/panel-tasks/{task['id']}")).json()

        assert task["status"] == "Completed"
        assert fetched["status"] == "Completed"
        p = await get_project(client, project["id"])
        assert p["completed_panel"] == 1

    async def test_blank_optional_fields_become_null(self, client):
        await create_project(client, "JOB-1")
        task = (await client.post("/api/accessories-tasks/", json={
            "title": "Hinges", "project_no": "JOB-1", "description": "", "due_date": "",
        })).json()

        assert task["description"] is None
        assert task["due_date"] is None

    async def test_list_filters_by_approve_status(self, client):
        await create_project(client, "JOB-1")
        await client.post("/api/system-tasks/", json={
            "title": "Approved", "project_no": "JOB-1", "approve_status": "Approved",
        })
        await client.post("/api/system-tasks/", json={"title": "Draft", "project_no": "JOB-1"})

        response = await client.get("/api/system-tasks/", params={"approve_status": "Approved"})

        assert [t["title"] for t in response.json()] == ["Approved"]


class TestFiles:
    async def test_upload_creates_linked_tasks(self, client):
        project = await create_project(client, "JOB-F", requested_delivery="2026-12-01")

        response = await client.post(
            "/api/projects/upload",
            data={"project_no": "JOB-F", "category": "strip_curtain"},
            files=[
                ("files", ("a.png", b"png-bytes", "image/png")),
                ("files", ("b.png", b"more-bytes", "image/png")),
                ("files", ("empty.png", b"", "image/png")),
            ],
        )

        assert response.status_code == 200, response.text
        body = response.json()
        assert body["count"] == 2
        assert body["tasks_created"] == 2
        assert all(f["task_id"] is not None for f in body["files"])

        tasks = (await client.get("/api/strip-curtain-tasks/", params={"project_no": "JOB-F"})).json()
        assert {t["title"] for t in tasks} == {
            "Strip Curtain Task: a.png", "Strip Curtain Task: b.png",
        }
        assert all(t["due_date"] == "2026-12-01" and t["approve_status"] == "Pending" for t in tasks)

        p = await get_project(client, project["id"])
        assert p["total_strip_curtain"] == 2

    async def test_upload_to_missing_project(self, client):
        response = await client.post(
            "/api/projects/upload",
            data={"project_no": "NOPE", "category": "panel"},
            files=[("files", ("a.txt", b"x", "text/plain"))],
        )
        assert response.status_code == 404

    async def test_blob_and_delete(self, client):
        project = await create_project(client, "JOB-G")
        uploaded = (await client.post(
            "/api/projects/upload",
            data={"project_no": "JOB-G", "category": "door"},
            files=[("files", ("door.pdf", b"%PDF-door", "application/pdf"))],
        )).json()
        file_id = uploaded["files"][0]["id"]

        blob = await client.get(f"/api/projects/file/blob/{file_id}")
        assert blob.status_code == 200
        assert blob.content == b"%PDF-door"
        assert blob.headers["content-type"] == "application/pdf"
        assert 'filename="door.pdf"' in blob.headers["content-disposition"]

        listed = (await client.get("/api/projects/JOB-G/files", params={"category": "all"})).json()
        assert [f["file_name"] for f in listed] == ["door.pdf"]

        deleted = await client.delete(f"/api/projects/file/{file_id}")
        assert deleted.status_code == 200
        assert deleted.json()["task_deleted"] is True

        p = await get_project(client, project["id"])
        assert (p["total_door"], p["completed_door"]) == (0, 0)
        assert (await client.get(f"/api/projects/file/blob/{file_id}")).status_code == 404


class TestReconcileRoute:
    async def test_reconcile_repairs_seeded_counters(self, client):
        project = await create_project(client, "JOB-R", total_panel=4, completed_panel=2)

        response = await client.post("/api/projects/JOB-R/reconcile")

        assert response.status_code == 200
        assert {d["column"] for d in response.json()["drift"]} == {"total_panel", "completed_panel"}
        p = await get_project(client, project["id"])
        assert (p["total_panel"], p["completed_panel"]) == (0, 0)


class TestActivityAndSubtasks:
    async def test_activity_is_logged(self, client):
        project = await create_project(client, "JOB-L")
        await client.patch(f"/api/projects/{project['id']}/status", json={"status": "Done"})

        response = await client.get("/api/activity-logs/", params={"resource_type": "PROJECT"})

        logs = response.json()
        assert sorted(log["activity_type"] for log in logs) == ["CREATE", "UPDATE"]
        assert any(log["details"].get("new_status") == "Done" for log in logs)
        assert all(log["resource_id"] == str(project["id"]) for log in logs)

    async def test_subtask_flow(self, client):
        created = await client.post("/api/subtasks/", json={
            "title": "Order hinges", "project_id": 1, "category_task_id": 7, "category": "Accessories",
        })
        assert created.status_code == 201
        subtask = created.json()
        assert subtask["status"] == "pending"

        done = await client.patch(f"/api/subtasks/{subtask['id']}/done")
        assert done.json()["status"] == "done"

        for_task = await client.get("/api/subtasks/task/7", params={"category": "Accessories"})
        assert [s["id"] for s in for_task.json()] == [subtask["id"]]

        assert (await client.delete(f"/api/subtasks/{subtask['id']}")).status_code == 204
        assert (await client.delete(f"/api/subtasks/{subtask['id']}")).status_code == 404


class TestOrders:
    async def create_order(self, client, **overrides):
        body = {
            "task_id": 7,
            "project_no": "JOB-O",
            "task_title": "Accessories Task: hinges.pdf",
            "items": [
                {"description": "Hinge, stainless", "quantity": 12, "unit": "pcs"},
                {"description": "Gasket", "quantity": 2.5, "unit": "m"},
            ],
            **overrides,
        }
        return await client.post("/api/orders/", json=body)

    async def test_order_flow(self, client):
        created = await self.create_order(client)
        assert created.status_code == 201, created.text
        order = created.json()
        assert order["status"] == "pending"
        assert order["category"] == "Accessories"
        assert [item["quantity"] for item in order["items"]] == [12, 2.5]

        updated = await client.put(f"/api/orders/{order['id']}", json={"status": "Ordered"})
        assert updated.status_code == 200
        assert updated.json()["status"] == "Ordered"
        assert updated.json()["items"] == order["items"]

        for_task = await client.get("/api/orders/task/7")
        assert [o["id"] for o in for_task.json()] == [order["id"]]
        assert (await client.get("/api/orders/task/8")).json() == []

        assert (await client.delete(f"/api/orders/{order['id']}")).status_code == 204
        assert (await client.delete(f"/api/orders/{order['id']}")).status_code == 404
        assert (await client.get("/api/orders/")).json() == []

    async def test_items_are_validated(self, client):
        no_items = await self.create_order(client, items=[])
        no_quantity = await self.create_order(client, items=[{"description": "Hinge"}])
        blank_description = await self.create_order(
            client, items=[{"description": "", "quantity": 1}]
        )

        assert no_items.status_code == 422
        assert no_quantity.status_code == 422
        assert blank_description.status_code == 422

    async def test_blank_status_rejected(self, client):
        order = (await self.create_order(client)).json()

        response = await client.put(f"/api/orders/{order['id']}", json={"status": " "})

        assert response.status_code == 400

    async def test_unknown_order(self, client):
        response = await client.put("/api/orders/99", json={"status": "Ordered"})
        assert response.status_code == 404

    async def test_orders_follow_their_project(self, client):
        project = await create_project(client, "JOB-O")
        await self.create_order(client)

        await client.patch(f"/api/projects/{project['id']}", json={"project_no": "JOB-P"})
        [order] = (await client.get("/api/orders/")).json()
        assert order["project_no"] == "JOB-P"

        await client.delete(f"/api/projects/{project['id']}")
        assert (await client.get("/api/orders/")).json() == []


async def test_health(client):
    response = await client.get("/health")
    assert response.json() == {"status": "healthy"}

"""Notifications du membre connecté."""

from app.models import Notification
from app.services import NotificationPayload, notification_service


def notifier(db, user, titre="Info", count=1):
    for i in range(count):
        notification_service.notify(db, [user.id], NotificationPayload(titre=f"{titre} {i}", message="..."))
    db.commit()


def test_notify_deduplicates_recipients(db, make_user):
    member = make_user()

    created = notification_service.notify(
        db, [member.id, member.id], NotificationPayload(titre="Bonjour", message="...")
    )

    assert created == 1


def test_notify_roles_reaches_admins_and_active_gestionnaires(db, make_user):
    admin = make_user(role="ADMIN")
    rpv = make_user(gestionnaire_role="RESPONSABLE_POINT_DE_VENTE")
    comptable = make_user(gestionnaire_role="COMPTABLE")

    created = notification_service.notify_roles(
        db,
        ["RESPONSABLE_POINT_DE_VENTE"],
        NotificationPayload(titre="Stock", message="..."),
    )
    db.commit()

    assert created == 2
    destinataires = {n.user_id for n in db.query(Notification).all()}
    assert destinataires == {admin.id, rpv.id}
    assert comptable.id not in destinataires


def test_list_and_unread_count(client, db, make_user, auth_headers):
    member = make_user()
    other = make_user(prenom="Issa")
    notifier(db, member, count=3)
    notifier(db, other)

    response = client.get("/api/notifications", headers=auth_headers(member))
    assert response.status_code == 200
    assert len(response.json()["data"]) == 3

    response = client.get("/api/notifications/unread", headers=auth_headers(member))
    assert response.json() == {"data": 3}


def test_mark_read_and_read_all(client, db, make_user, auth_headers):
    member = make_user()
    notifier(db, member, count=2)
    first = db.query(Notification).filter(Notification.user_id == member.id).first()

    response = client.patch(f"/api/notifications/{first.uuid}/read", headers=auth_headers(member))
    assert response.json() == {"data": {"updated": 1}}
    assert client.get("/api/notifications/unread", headers=auth_headers(member)).json() == {"data": 1}

    response = client.get("/api/notifications?lue=true", headers=auth_headers(member))
    assert [n["uuid"] for n in response.json()["data"]] == [first.uuid]

    response = client.patch("/api/notifications/readAll", headers=auth_headers(member))
    assert response.json() == {"data": {"updated": 1}}
    assert client.get("/api/notifications/unread", headers=auth_headers(member)).json() == {"data": 0}


def test_cannot_touch_other_users_notification(client, db, make_user, auth_headers):
    owner = make_user()
    intruder = make_user(prenom="Issa")
    notifier(db, owner)
    notification = db.query(Notification).one()

    response = client.delete(f"/api/notifications/{notification.uuid}", headers=auth_headers(intruder))

    assert response.json() == {"data": {"deleted": 0}}
    assert db.query(Notification).count() == 1


def test_delete_all(client, db, make_user, auth_headers):
    member = make_user()
    notifier(db, member, count=2)

    response = client.delete("/api/notifications", headers=auth_headers(member))

    assert response.json() == {"data": {"deleted": 2}}
    assert db.query(Notification).count() == 0


def test_notifications_require_session(client):
    assert client.get("/api/notifications").status_code == 401

from nagar_connect.models.common import oid_str


def to_user_out(doc: dict) -> dict:
    """
    Stored user -> API shape. Never carries the password hash.
    """
    return {
        "id": oid_str(doc["_id"]),
        "fullName": doc.get("full_name") or "",
        "email": doc.get("email") or "",
        "userType": doc.get("user_type", "citizen"),
        "phoneNumber": doc.get("phone_number"),
        "profilePicture": doc.get("profile_picture"),
        "createdAt": doc.get("created_at"),
    }

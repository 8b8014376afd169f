from marshmallow import EXCLUDE, Schema, fields, pre_load

from models.schemas.common import not_blank, strip_strings


def _norm_email(v):
    return v.strip().lower() if isinstance(v, str) else v


class _InputSchema(Schema):
    class Meta:
        unknown = EXCLUDE


class RegisterSchema(_InputSchema):
    email = fields.Email(required=True, validate=not_blank)
    fullname = fields.String(required=True, validate=not_blank)
    password = fields.String(required=True, load_only=True, validate=not_blank)

    @pre_load
    def normalize(self, data, **kwargs):
        data = strip_strings(data, "fullname")
        if isinstance(data, dict) and "email" in data:
            data["email"] = _norm_email(data["email"])
        return data


class LoginSchema(_InputSchema):
    email = fields.String(required=True, validate=not_blank)
    password = fields.String(required=True, load_only=True, validate=not_blank)

    @pre_load
    def normalize(self, data, **kwargs):
        if isinstance(data, dict) and "email" in data:
            data = dict(data)
            data["email"] = _norm_email(data["email"])
        return data


class ChangePasswordSchema(_InputSchema):
    old_password = fields.String(required=True, data_key="oldPassword", validate=not_blank)
    new_password = fields.String(required=True, data_key="newPassword", validate=not_blank)
    confirm_password = fields.String(required=True, data_key="confirmPassword", validate=not_blank)


class UpdateAccountSchema(_InputSchema):
    # None counts as "not provided"; blank strings are rejected
    email = fields.Email(allow_none=True, validate=not_blank)
    fullname = fields.String(allow_none=True, validate=not_blank)

    @pre_load
    def normalize(self, data, **kwargs):
        data = strip_strings(data, "fullname")
        if isinstance(data, dict) and "email" in data:
            data["email"] = _norm_email(data["email"])
        return data


class UserOutSchema(Schema):
    id = fields.String()
    email = fields.String()
    fullname = fields.String()
    created_at = fields.DateTime(data_key="createdAt")
    updated_at = fields.DateTime(data_key="updatedAt")


class TokenPairOutSchema(Schema):
    access_token = fields.String(data_key="accessToken")
    refresh_token = fields.String(data_key="refreshToken")

from marshmallow import EXCLUDE, Schema, fields, pre_load

from models.schemas.common import not_blank, strip_strings


class NoteCreateSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    title = fields.String(required=True, validate=not_blank)
    content = fields.String(required=True, validate=not_blank)
    tags = fields.List(fields.String(validate=not_blank), load_default=list)
    is_pinned = fields.Boolean(data_key="isPinned", load_default=False)

    @pre_load
    def normalize(self, data, **kwargs):
        return strip_strings(data, "title")


class NoteUpdateSchema(Schema):
    """Partial update: only keys present with a non-null value are applied."""

    class Meta:
        unknown = EXCLUDE

    title = fields.String(allow_none=True, validate=not_blank)
    content = fields.String(allow_none=True, validate=not_blank)
    tags = fields.List(fields.String(validate=not_blank), allow_none=True)
    is_pinned = fields.Boolean(data_key="isPinned", allow_none=True)

    @pre_load
    def normalize(self, data, **kwargs):
        return strip_strings(data, "title")


class NotePinSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    is_pinned = fields.Boolean(data_key="isPinned", required=True, allow_none=False)


class NoteOutSchema(Schema):
    id = fields.String()
    title = fields.String()
    content = fields.String()
    tags = fields.List(fields.String())
    is_pinned = fields.Boolean(data_key="isPinned")
    user_id = fields.String(data_key="userId")
    created_at = fields.DateTime(data_key="createdAt")
    updated_at = fields.DateTime(data_key="updatedAt")

import json
import logging
from datetime import datetime

from mysql_db import MysqlDb

TIME_FORMAT_NO_OFFSET = "%Y-%m-%d %H:%M:%S"

logger = logging.getLogger(__name__)

ATTACHMENT_COLUMNS = "id, original_filename, internal_filename, mime_type, post_status, datetime, metadata"


class AttachmentDb(MysqlDb):
    def __init__(self, table_prefix=None):
        super().__init__(table_prefix)
        self.table = f"{self.prefix}attachments"

    def table_definitions(self):
        return {
            self.table: (
                f"CREATE TABLE IF NOT EXISTS `{self.table}` ("
                "  id BIGINT UNSIGNED NOT NULL AUTO_INCREMENT PRIMARY KEY,"
                "  original_filename VARCHAR(2000),"
                "  internal_filename VARCHAR(500) NOT NULL,"
                "  mime_type VARCHAR(100) NOT NULL,"
                "  post_status VARCHAR(20) NOT NULL DEFAULT 'inherit',"
                "  datetime DATETIME,"
                "  metadata LONGTEXT,"
                "  KEY mime_status (mime_type, post_status)"
                ") ENGINE=InnoDB DEFAULT CHARSET=utf8mb4"
            ),
        }

    def create_attachment_record(self, original_filename, internal_filename, mime_type, datetime_record,
                                 post_status='inherit'):
        sql = (f"INSERT INTO `{self.table}` "
               "(original_filename, internal_filename, mime_type, post_status, datetime, metadata) "
               "VALUES (%s, %s, %s, %s, %s, NULL)")
        self.log(f"Inserting attachment record for {internal_filename}")
        return self.execute(
            sql,
            (original_filename, internal_filename, mime_type, post_status,
             datetime_record.strftime(TIME_FORMAT_NO_OFFSET)),
            fetch='lastrowid'
        )

    def _to_record(self, row):
        (id, original_filename, internal_filename, mime_type, post_status,
         datetime_record, metadata) = row
        if isinstance(datetime_record, str):
            datetime_record = datetime.strptime(datetime_record, TIME_FORMAT_NO_OFFSET)
        return {'id': id,
                'original_filename': original_filename,
                'internal_filename': internal_filename,
                'mime_type': mime_type,
                'post_status': post_status,
                'datetime': datetime_record,
                'metadata': json.loads(metadata) if metadata else None,
                }

    def get_attachment(self, attachment_id):
        row = self.execute(
            f"SELECT {ATTACHMENT_COLUMNS} FROM `{self.table}` WHERE id = %s",
            (attachment_id,),
            fetch='one'
        )
        return self._to_record(row) if row else None

    def get_attachment_by_internal_filename(self, internal_filename):
        row = self.execute(
            f"SELECT {ATTACHMENT_COLUMNS} FROM `{self.table}` WHERE internal_filename = %s",
            (internal_filename,),
            fetch='one'
        )
        return self._to_record(row) if row else None

    def get_image_attachment_ids(self, limit, offset=0):
        """One page of image attachment ids, newest first."""
        rows = self.execute(
            f"SELECT id FROM `{self.table}` "
            "WHERE mime_type LIKE %s AND post_status = %s "
            "ORDER BY datetime DESC, id DESC LIMIT %s OFFSET %s",
            ('image/%', 'inherit', int(limit), int(offset)),
            fetch='all'
        )
        return [row[0] for row in rows]

    def count_image_attachments(self):
        row = self.execute(
            f"SELECT COUNT(*) FROM `{self.table}` WHERE mime_type LIKE %s AND post_status = %s",
            ('image/%', 'inherit'),
            fetch='one'
        )
        return int(row[0]) if row else 0

    def update_attachment_metadata(self, attachment_id, metadata):
        self.execute(
            f"UPDATE `{self.table}` SET metadata = %s WHERE id = %s",
            (json.dumps(metadata), attachment_id)
        )

    def delete_attachment_record(self, attachment_id):
        self.log(f"Deleting attachment record {attachment_id}")
        self.execute(f"DELETE FROM `{self.table}` WHERE id = %s", (attachment_id,))

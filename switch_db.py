import json
import logging
import time

import mysql.connector
from mysql.connector import errorcode

from mysql_db import MysqlDb
from thumbswitch.errors import SettingsError
from thumbswitch.size_registry import SIZES_TRANSIENT
from thumbswitch.utils import is_truthy

logger = logging.getLogger(__name__)

DEFAULT_SETTINGS = {
    'cleanup_on_uninstall': False,
    'disable_all': False,
    'disabled_sizes': [],
}


def serialize_value(value):
    return json.dumps(value)


def unserialize_value(raw):
    """Decode a stored value. Rows that are not JSON come back as the raw string."""
    if raw is None:
        return None
    if isinstance(raw, (bytes, bytearray)):
        raw = raw.decode('utf-8')
    try:
        return json.loads(raw)
    except ValueError:
        return raw


class SwitchDb(MysqlDb):
    """Key/value settings table plus the transients table.

    Both tables are created on first use: a statement that fails because a
    table is missing creates the tables and runs again once.

    get_setting always reads the table. get_all_settings is memoized until
    the next write through this instance or clear_cache().
    """

    def __init__(self, table_prefix=None):
        super().__init__(table_prefix)
        self.settings_table = f"{self.prefix}thumbswitch_settings"
        self.transients_table = f"{self.prefix}thumbswitch_transients"
        self.settings_cache = None

    def table_definitions(self):
        return {
            self.settings_table: (
                f"CREATE TABLE IF NOT EXISTS `{self.settings_table}` ("
                "  id BIGINT UNSIGNED NOT NULL AUTO_INCREMENT,"
                "  setting_key VARCHAR(191) NOT NULL,"
                "  setting_value LONGTEXT,"
                "  PRIMARY KEY (id),"
                "  UNIQUE KEY setting_key (setting_key)"
                ") ENGINE=InnoDB DEFAULT CHARSET=utf8mb4"
            ),
            self.transients_table: (
                f"CREATE TABLE IF NOT EXISTS `{self.transients_table}` ("
                "  id BIGINT UNSIGNED NOT NULL AUTO_INCREMENT,"
                "  transient_key VARCHAR(191) NOT NULL,"
                "  transient_value LONGTEXT,"
                "  expires_at BIGINT UNSIGNED NOT NULL DEFAULT 0,"
                "  PRIMARY KEY (id),"
                "  UNIQUE KEY transient_key (transient_key)"
                ") ENGINE=InnoDB DEFAULT CHARSET=utf8mb4"
            ),
        }

    def drop_tables(self):
        cursor, connection = None, None
        try:
            cursor, connection = self.get_cursor()
            for table_name in (self.settings_table, self.transients_table):
                self.log(f"Dropping table {table_name}")
                cursor.execute(f"DROP TABLE IF EXISTS `{table_name}`")
            connection.commit()
        finally:
            if cursor:
                cursor.close()
            if connection:
                self.close_connection(connection)
        self.settings_cache = None

    def execute(self, sql, params=None, fetch=None, recover=True):
        try:
            return super().execute(sql, params, fetch)
        except mysql.connector.Error as e:
            if not (recover and e.errno == errorcode.ER_NO_SUCH_TABLE):
                raise
            self.log("Recreating tables")

        self.create_tables()
        return self.execute(sql, params, fetch, recover=False)

    # Settings

    def save_setting(self, key, value):
        """Insert or replace a setting. Raises SettingsError on failure."""
        sql = f"REPLACE INTO `{self.settings_table}` (setting_key, setting_value) VALUES (%s, %s)"
        try:
            self.execute(sql, (key, serialize_value(value)))
        except mysql.connector.Error as e:
            logger.error(f"Settings DB error: {e}")
            raise SettingsError(f"Failed to save setting {key}") from e

        self.settings_cache = None
        return True

    def get_setting(self, key, default=''):
        row = self.execute(
            f"SELECT setting_value FROM `{self.settings_table}` WHERE setting_key = %s",
            (key,),
            fetch='one'
        )
        if row is None:
            return default
        return unserialize_value(row[0])

    def get_all_settings(self):
        if self.settings_cache is not None:
            return self.settings_cache

        rows = self.execute(
            f"SELECT setting_key, setting_value FROM `{self.settings_table}`",
            fetch='all'
        )
        all_settings = {}
        for setting_key, setting_value in rows or []:
            all_settings[setting_key] = unserialize_value(setting_value)

        self.settings_cache = all_settings
        return all_settings

    def delete_setting(self, key):
        try:
            self.execute(f"DELETE FROM `{self.settings_table}` WHERE setting_key = %s", (key,))
        except mysql.connector.Error as e:
            logger.error(f"Settings DB error: {e}")
            return False

        self.settings_cache = None
        return True

    def clear_cache(self):
        self.settings_cache = None

    # Transients

    def set_transient(self, name, value, expiration=0):
        """Store a value for expiration seconds; 0 keeps it until deleted."""
        expires_at = int(time.time()) + int(expiration) if expiration else 0
        self.execute(
            f"REPLACE INTO `{self.transients_table}` (transient_key, transient_value, expires_at) "
            "VALUES (%s, %s, %s)",
            (name, serialize_value(value), expires_at)
        )
        return True

    def get_transient(self, name):
        row = self.execute(
            f"SELECT transient_value, expires_at FROM `{self.transients_table}` WHERE transient_key = %s",
            (name,),
            fetch='one'
        )
        if row is None:
            return None

        transient_value, expires_at = row
        if expires_at and expires_at < time.time():
            self.log(f"Transient {name} expired")
            self.delete_transient(name)
            return None
        return unserialize_value(transient_value)

    def delete_transient(self, name):
        self.execute(f"DELETE FROM `{self.transients_table}` WHERE transient_key = %s", (name,))
        return True

    # Lifecycle

    def activate(self):
        """Create the tables and store defaults for settings not yet saved."""
        self.create_tables()
        existing = self.get_all_settings()
        for key, value in DEFAULT_SETTINGS.items():
            if key not in existing:
                self.save_setting(key, value)

    def deactivate(self):
        self.delete_transient(SIZES_TRANSIENT)

    def uninstall(self):
        """Drop all tables if the administrator asked for cleanup.
        Returns True when the data was removed.
        """
        if not is_truthy(self.get_setting('cleanup_on_uninstall', False)):
            logger.info("Cleanup on uninstall is off; keeping settings")
            return False

        self.drop_tables()
        logger.info("Removed thumbnail switch tables")
        return True

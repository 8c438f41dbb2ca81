import configparser
import logging

import mysql.connector
from mysql.connector import errorcode, pooling
from retrying import retry

import settings

logger = logging.getLogger(__name__)


class MysqlDb:
    """Shared connection handling for the tables this server owns.

    Every subclass draws its connections from one process-wide pool.
    Subclasses list their CREATE statements in table_definitions().
    """

    connection_pool = None

    def __init__(self, table_prefix=None):
        self.pool_size = self.init_pool_size()
        self.prefix = settings.TABLE_PREFIX if table_prefix is None else table_prefix

    def init_pool_size(self):
        """sets pool size by getting # of workers and threads from uwsgi"""
        config = configparser.ConfigParser()
        config.read("./uwsgi.ini")
        workers = int(config.get("uwsgi", "workers", fallback=4))
        threads = int(config.get("uwsgi", "threads", fallback=8))
        return min(workers * threads, pooling.CNX_POOL_MAXSIZE)

    def log(self, msg):
        logger.debug(msg)

    def table_definitions(self):
        """Map of table name to its CREATE TABLE statement."""
        return {}

    def initialize_pool(self):
        """
        Initialize the connection pool lazily if it hasn't been created yet.
        """
        if not MysqlDb.connection_pool:
            self.log("Initializing connection pool...")
            try:
                MysqlDb.connection_pool = pooling.MySQLConnectionPool(
                    pool_name="thumbswitch_pool",
                    pool_size=self.pool_size,
                    user=settings.SQL_USER,
                    password=settings.SQL_PASSWORD,
                    host=settings.SQL_HOST,
                    port=settings.SQL_PORT,
                    database=settings.SQL_DATABASE,
                )
                self.log("Connection pool initialized.")
            except mysql.connector.Error as err:
                logger.error(f"Failed to initialize connection pool: {err}")
                raise

    def connect(self):
        """Return True once the database answers."""
        try:
            self.initialize_pool()
            return True
        except mysql.connector.Error:
            return False

    @retry(retry_on_exception=lambda e: isinstance(e, mysql.connector.Error), stop_max_attempt_number=3, wait_exponential_multiplier=1000)
    def get_cursor(self):
        """
        Get a connection from the pool and create a cursor.
        """
        try:
            self.initialize_pool()
            connection = MysqlDb.connection_pool.get_connection()
            return connection.cursor(buffered=True), connection
        except mysql.connector.Error as e:
            self.log(f"Error getting cursor: {e}")
            raise

    def close_connection(self, connection):
        """
        Return a connection to the pool.
        """
        if connection:
            try:
                connection.close()
            except mysql.connector.Error as e:
                self.log(f"Error closing connection: {e}")

    def create_tables(self):
        cursor, connection = None, None
        try:
            cursor, connection = self.get_cursor()
            for table_name, table_description in self.table_definitions().items():
                try:
                    self.log(f"Creating table {table_name}...")
                    cursor.execute(table_description)
                    self.log(f"Table {table_name} creation: OK")
                except mysql.connector.Error as err:
                    if err.errno == errorcode.ER_TABLE_EXISTS_ERROR:
                        self.log(f"Table {table_name} already exists.")
                    else:
                        logger.error(f"Error creating table {table_name}: {err}")
                        raise
        finally:
            if cursor:
                cursor.close()
            if connection:
                self.close_connection(connection)

    def execute(self, sql, params=None, fetch=None):
        """Run one statement and commit.

        fetch is None (return the row count), 'one', 'all' or 'lastrowid'.
        """
        cursor, connection = None, None
        try:
            cursor, connection = self.get_cursor()
            self.log(f"SQL: {sql} {params}")
            cursor.execute(sql, params or ())
            if fetch == 'one':
                result = cursor.fetchone()
            elif fetch == 'all':
                result = cursor.fetchall()
            elif fetch == 'lastrowid':
                result = cursor.lastrowid
            else:
                result = cursor.rowcount
            connection.commit()
            return result
        except mysql.connector.Error as e:
            if e.errno == errorcode.ER_NO_SUCH_TABLE:
                self.log(f"Missing table: {e}")
            else:
                logger.error(f"Error executing query: {e}")
            raise
        finally:
            if cursor:
                cursor.close()
            if connection:
                self.close_connection(connection)

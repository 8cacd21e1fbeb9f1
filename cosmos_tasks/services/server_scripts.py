"""JavaScript scripts that run inside a task container.

``bulkInsert`` is executed by ``CosmosService.execute_bulk_insert``,
``getDaysLeft`` is used by the remaining-days query and the two triggers can
be enabled for task creation through COSMOS_PRE_TRIGGER / COSMOS_POST_TRIGGER.
"""
import logging

from azure.cosmos import exceptions
from azure.cosmos.aio import ContainerProxy

logger = logging.getLogger(__name__)

BULK_INSERT_SPROC = """
function bulkInsert(items) {
    var container = getContext().getCollection();
    var response = getContext().getResponse();
    var count = 0;

    if (!items || items.length === 0) {
        response.setBody(0);
        return;
    }

    tryCreate(items[count], callback);

    function tryCreate(item, cb) {
        var accepted = container.createDocument(container.getSelfLink(), item, cb);
        if (!accepted) response.setBody(count);
    }

    function callback(err) {
        if (err) throw err;
        count++;
        if (count >= items.length) {
            response.setBody(count);
        } else {
            tryCreate(items[count], callback);
        }
    }
}
"""

CHECK_SAME_NAME_TRIGGER = """
function checkSameName() {
    var container = getContext().getCollection();
    var item = getContext().getRequest().getBody();
    var query = {
        query: "SELECT VALUE COUNT(1) FROM c WHERE c.TaskName = @name",
        parameters: [{ name: "@name", value: item.TaskName }]
    };

    var accepted = container.queryDocuments(container.getSelfLink(), query, function (err, result) {
        if (err) throw err;
        if (result[0] > 0) throw new Error("A task named '" + item.TaskName + "' already exists.");
    });
    if (!accepted) throw new Error("Duplicate name check was not accepted by the server.");
}
"""

INSERT_LOG_TRIGGER = """
function insertLog() {
    var created = getContext().getResponse().getBody();
    console.log("Inserted task " + created.id + " (" + created.TaskName + ") at " + new Date().toISOString());
}
"""

DAYS_LEFT_UDF = """
function getDaysLeft(deadline) {
    if (!deadline) return 0;
    var msPerDay = 24 * 60 * 60 * 1000;
    return Math.ceil((new Date(deadline).getTime() - Date.now()) / msPerDay);
}
"""

STORED_PROCEDURES = {"bulkInsert": BULK_INSERT_SPROC}

TRIGGERS = {
    "checkSameName": {"triggerType": "Pre", "body": CHECK_SAME_NAME_TRIGGER},
    "insertLog": {"triggerType": "Post", "body": INSERT_LOG_TRIGGER},
}

USER_DEFINED_FUNCTIONS = {"getDaysLeft": DAYS_LEFT_UDF}


async def register_scripts(container: ContainerProxy) -> None:
    """Create (or replace) every stored procedure, trigger and UDF."""
    scripts = container.scripts

    for sproc_id, body in STORED_PROCEDURES.items():
        definition = {"id": sproc_id, "body": body}
        try:
            await scripts.create_stored_procedure(body=definition)
        except exceptions.CosmosResourceExistsError:
            await scripts.replace_stored_procedure(sproc=sproc_id, body=definition)
        logger.info("Registered stored procedure %s on %s", sproc_id, container.id)

    for trigger_id, trigger in TRIGGERS.items():
        definition = {
            "id": trigger_id,
            "body": trigger["body"],
            "triggerType": trigger["triggerType"],
            "triggerOperation": "Create",
        }
        try:
            await scripts.create_trigger(body=definition)
        except exceptions.CosmosResourceExistsError:
            await scripts.replace_trigger(trigger=trigger_id, body=definition)
        logger.info("Registered trigger %s on %s", trigger_id, container.id)

    for udf_id, body in USER_DEFINED_FUNCTIONS.items():
        definition = {"id": udf_id, "body": body}
        try:
            await scripts.create_user_defined_function(body=definition)
        except exceptions.CosmosResourceExistsError:
            await scripts.replace_user_defined_function(udf=udf_id, body=definition)
        logger.info("Registered user defined function %s on %s", udf_id, container.id)

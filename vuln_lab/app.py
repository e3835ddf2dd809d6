"""AuraLab: deliberately exposed Experience Cloud look-alike for AuraRecon testing.

Serves a community page bootstrapping the Aura framework, guest cookies and
a handful of script resources that reference Aura actions and insecure
client-side patterns. One referenced script is missing on purpose so the
scanner's partial-failure path can be exercised.
"""

from flask import Flask, Response, make_response, redirect

app = Flask(__name__)

FWUID = "SHhrT2dGYl9ZRmtCcGZ4TUtKRjNvUVdQNmJzRDRCa0Y"
APP_NAME = "siteforce:communityApp"
TOKEN = "eyJub25jZSI6ImxhYiIsInR5cCI6IkpXVCJ9.guest"


def js(body: str) -> Response:
    return Response(body, mimetype="application/javascript")


# ══════════════════════════════════════════════════════════════════
#  COMMUNITY PAGE: bootstrap config, cookies, script tags
# ══════════════════════════════════════════════════════════════════

_PAGE = """<!DOCTYPE html>
<html><head><title>AuraLab Customer Portal</title>
<script src="/s/sfsites/auraFW/javascript/%(fwuid)s/aura_prod.js"></script>
<script src="/s/sfsites/l/app.js"></script>
<script src="/resource/portal.js?v=3"></script>
<script src="/resource/missing.js"></script>
<script src="https://cdn.example.invalid/analytics.css"></script>
</head>
<body>
<div id="auraAppcacheProgress">Loading...</div>
<script>
var auraConfig = {"context":{"mode":"PROD","fwuid":"%(fwuid)s","app":"%(app)s",
  "loaded":{"APPLICATION@markup://siteforce:communityApp":"1183_guest",
            "COMPONENT@markup://instrumentation:o11ySecondaryLoader":"332_x"},
  "dn":[],"globals":{},"uad":true},
  "pathPrefix":"","isGuest":true};
aura.token = "%(token)s";
$A.enqueueAction($A.get("aura://RecordUiController/ACTION$getRecordWithFields"));
$A.enqueueAction($A.get("aura://CommunityLoginController/ACTION$login"));
</script>
</body></html>
"""


@app.route("/")
def home():
    return redirect("/s/")


@app.route("/s/")
def community():
    resp = make_response(_PAGE % {"fwuid": FWUID, "app": APP_NAME, "token": TOKEN})
    resp.set_cookie("renderCtx", "%7B%22pageId%22%3A%22home%22%7D", path="/s", secure=True)
    resp.set_cookie("CookieConsentPolicy", "0:1", path="/")
    resp.set_cookie("BrowserId", "lab-browser-0001", httponly=True)
    return resp


# ══════════════════════════════════════════════════════════════════
#  SCRIPT RESOURCES
# ══════════════════════════════════════════════════════════════════

@app.route("/s/sfsites/auraFW/javascript/<fwuid>/aura_prod.js")
def aura_framework(fwuid):
    return js("""
/* Aura framework bundle (trimmed) */
var AuraInstance = function(){ this.endpoint = "/s/sfsites/aura"; };
AuraInstance.prototype.ping = function(){
  return "aura://HostConfigController/ACTION$getConfigData";
};
window.parent.postMessage({type: "aura:ready"}, "*");
""")


@app.route("/s/sfsites/l/app.js")
def community_app():
    return js("""
({
  loadCases : function(cmp) {
    var action = cmp.get("c.getCases");
    // apex://PortalCaseController/ACTION$getCases
    action.setParams({ accountId: cmp.get("v.accountId"), status: "Open", pageSize: 25, includeClosed: false });
    $A.enqueueAction(action);
  },
  closeCase : function(cmp) {
    var closeAction = "apex://PortalCaseController/ACTION$updateCaseStatus";
    cmp.get("c.updateCaseStatus").setParams({ caseId: cmp.get("v.recordId"), status: "Closed" });
  },
  render : function(cmp, evt) {
    cmp.find("body").getElement().innerHTML = evt.getParam("html");
    window.addEventListener("message", function(e) { cmp.set("v.payload", e.data); });
  }
})
""")


@app.route("/resource/portal.js")
def portal_resource():
    return js("""
var svc = "serviceComponent://ui.comm.portal.PortalAttachmentController/ACTION$deleteAttachment";
var cfg = { apiVersion: "v59.0", restBase: "/services/data/v59.0/" };
function share(doc) {
  window.opener.postMessage(JSON.stringify(doc), '*');
}
""")


if __name__ == "__main__":
    print("\n  AuraLab starting on http://127.0.0.1:5000/s/\n")
    app.run(host="127.0.0.1", port=5000, debug=True)

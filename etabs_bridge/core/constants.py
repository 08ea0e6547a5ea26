"""
Constants for the ETABS automation bridge
"""

# Application identity
ETABS_PROCESS_NAME = "ETABS"
ETABS_PROGID = "CSI.ETABS.API.ETABSObject"
ETABS_HELPER_PROGID = "ETABSv1.Helper"

# Oldest major version exposing the ETABSv1 (.NET Standard) API
MINIMUM_SUPPORTED_VERSION = 22

# Native return code convention
RETURN_OK = 0
RETURN_LOCAL_FAILURE = -1   # Used when no native code exists (instantiation, transport)

# Output name consumed as the record count of an array call
COUNT_FIELD = "count"

# Group that ETABS defines in every model
ALL_GROUP = "All"

# COM HRESULTs meaning the native process is gone or unreachable
RPC_S_SERVER_UNAVAILABLE = -2147023174   # 0x800706BA
RPC_S_CALL_FAILED = -2147023170          # 0x800706BE
RPC_E_DISCONNECTED = -2147417848         # 0x80010108
CO_E_OBJNOTCONNECTED = -2147220995       # 0x800401FD
MK_E_UNAVAILABLE = -2147221021           # 0x800401E3

SESSION_LOST_HRESULTS = frozenset({
    RPC_S_SERVER_UNAVAILABLE,
    RPC_S_CALL_FAILED,
    RPC_E_DISCONNECTED,
    CO_E_OBJNOTCONNECTED,
    MK_E_UNAVAILABLE,
})

# Number of degrees of freedom in restraint / active DOF arrays
DOF_COUNT = 6

# Property modifier array lengths
FRAME_MODIFIER_COUNT = 8
AREA_MODIFIER_COUNT = 10

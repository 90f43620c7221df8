"""
Offline queue API
GET /api/offline/status
POST /api/offline/sync
POST /api/offline/probe
GET /api/offline/operations (admin)
POST /api/offline/operations {table, type, id?, payload}
POST /api/offline/operations/<id>/retry (admin)
DELETE /api/offline/operations/<id> (admin)
"""
import logging

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from accounts.permissions import IsAdmin, IsStaffMember
from blocks.services import BlockStore
from .entities import EntityKind, OperationType, handler_for
from .operations import offline_delete, offline_insert, offline_update
from .serializers import OfflineOperationSerializer, WriteOperationSerializer
from .services import get_sync_service, queue_status

logger = logging.getLogger(__name__)

# Writes against these kinds are refused for a frozen student.
BLOCK_GUARDED_KINDS = {
    EntityKind.PAYMENTS,
    EntityKind.EXAM_RESULTS,
    EntityKind.LESSON_HOMEWORK,
    EntityKind.LESSON_RECITATIONS,
    EntityKind.LESSON_SHEETS,
}


def _student_for(table, entity_id, payload):
    student_id = payload.get('student_id') or payload.get('student')
    if student_id or not entity_id:
        return student_id
    model = handler_for(table).model
    return model.objects.filter(pk=entity_id).values_list('student_id', flat=True).first()


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsStaffMember])
def status_view(request):
    return Response(queue_status())


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsStaffMember])
def sync_view(request):
    """Manual sync pass; skipped while offline or when a pass is already running."""
    report = get_sync_service().sync_all()
    return Response(report.as_dict())


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsStaffMember])
def probe_view(request):
    service = get_sync_service()
    online = service.monitor.probe()
    return Response({
        'online': online,
        'lastReport': service.last_report.as_dict() if service.last_report else None,
    })


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, IsStaffMember])
def operations_view(request):
    service = get_sync_service()

    if request.method == 'GET':
        if not IsAdmin().has_permission(request, None):
            return Response({'detail': 'Admin only'}, status=status.HTTP_403_FORBIDDEN)
        ops = service.queue.list_unsynced(include_stalled=True)
        serializer = OfflineOperationSerializer(
            ops, many=True, context={'max_attempts': service.queue.max_attempts}
        )
        return Response(serializer.data)

    serializer = WriteOperationSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    data = serializer.validated_data
    table = EntityKind(data['table'])
    op_type = data['type']
    entity_id = data.get('id') or None
    payload = data['payload']

    if table in BLOCK_GUARDED_KINDS and op_type != OperationType.DELETE and service.monitor.is_online:
        student_id = _student_for(table, entity_id, payload)
        outcome = BlockStore.load().check(student_id) if student_id else None
        if outcome is not None:
            return Response(
                {'detail': outcome.reason, 'status': 'blocked', 'studentId': str(outcome.student_id)},
                status=status.HTTP_409_CONFLICT,
            )

    if op_type == OperationType.INSERT:
        if entity_id:
            payload = {**payload, 'id': entity_id}
        result = offline_insert(table, payload, service=service)
    elif op_type == OperationType.UPDATE:
        result = offline_update(table, entity_id, payload, service=service)
    else:
        result = offline_delete(table, entity_id, service=service)

    body = {'success': result.success, 'offline': result.offline, 'id': result.id}
    code = status.HTTP_202_ACCEPTED if result.offline else status.HTTP_201_CREATED
    if result.offline:
        logger.info(f"[offline] {op_type} {table} id={result.id} saved locally")
    return Response(body, status=code)


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsAdmin])
def operation_retry_view(request, pk):
    if not get_sync_service().queue.retry(pk):
        return Response({'detail': 'Operation not found'}, status=status.HTTP_404_NOT_FOUND)
    return Response({'retried': True})


@api_view(['DELETE'])
@permission_classes([IsAuthenticated, IsAdmin])
def operation_discard_view(request, pk):
    if not get_sync_service().queue.discard(pk):
        return Response({'detail': 'Operation not found'}, status=status.HTTP_404_NOT_FOUND)
    return Response(status=status.HTTP_204_NO_CONTENT)
